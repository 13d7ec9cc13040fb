from sharewith.run_server import run

run()
