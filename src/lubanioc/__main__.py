from lubanioc.application import main

main()
