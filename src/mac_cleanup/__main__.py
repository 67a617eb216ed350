from mac_cleanup.cli import main

main()
