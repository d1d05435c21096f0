from inworld_token.cli import run

run()
