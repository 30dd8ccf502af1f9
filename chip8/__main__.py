from chip8.cli import run

run()
