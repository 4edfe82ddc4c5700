from mandalaflow.cli import main

main()
