from hatchery.pipeline import main

main()
