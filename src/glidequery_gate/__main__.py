from glidequery_gate.cli.main import main

main()
