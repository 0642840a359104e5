from tsp_path.cli import main


main()
