from . import gqlcode

gqlcode(prog_name="gqlcode")
