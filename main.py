import sys

from rich.pretty import pprint

from argot import *

__prog__ = "argot-demo"


def main():
    try:
        args = ArgumentSet.from_env(Flags.HELP | Flags.VERSION | Flags.REQUIRED)
    except WantsVersion:
        print(f"{__prog__} v{__version__}")
        return 0
    except WantsHelp:
        print(f"usage: {__prog__} [-v] [-o OUT] FILE...")
        return 0
    except ArgotFault as fault:
        return trigger(fault, shell=True)

    output = args.option2(b"-o", b"--output")
    verbose = args.switch2(b"-v", b"--verbose")
    files = args.args_str()

    pprint({"output": output, "verbose": verbose, "files": files})
    return 0


if __name__ == '__main__':
    sys.exit(main())
