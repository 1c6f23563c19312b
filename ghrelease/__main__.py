from ghrelease.cli.app import main

main()
