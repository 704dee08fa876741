from src.rollcall.rollcall.main import run

if __name__ == "__main__":
    run()
