from gha_pin.cli import main

main()
