from zrelease.cli.app import main

main()
