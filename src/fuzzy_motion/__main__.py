from fuzzy_motion.cli import main

main()
