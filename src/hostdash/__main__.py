from hostdash.app import main

main()
