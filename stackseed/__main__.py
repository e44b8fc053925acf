from stackseed.cli import main

main()
