from fluent_gwt.cli import main

main()
