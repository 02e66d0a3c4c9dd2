from wiretime.main import run

run()
