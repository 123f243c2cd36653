from netkan.cli import main

main()
