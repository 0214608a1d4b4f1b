from beat_the_intro.cli import main

if __name__ == "__main__":
    main()
