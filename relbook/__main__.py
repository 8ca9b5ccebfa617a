from relbook.cli.app import main

main()
