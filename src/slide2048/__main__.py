from .cli_driver import main

main()
