from hangar_dashboard.cli import main

main()
