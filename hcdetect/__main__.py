from hcdetect.cli import main

main()
