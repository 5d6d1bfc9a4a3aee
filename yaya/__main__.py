from yaya.img2yaya import main

main()
