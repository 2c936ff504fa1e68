from icerel.cli.app import main

main()
