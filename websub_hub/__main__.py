from websub_hub.cli import main

main()
