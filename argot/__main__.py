"""
Debug tool: show how argot sees the arguments it is given.

    python -m argot -kVal --key=Val file.txt
    python -m argot stream --threads=4 build -- raw tail

the first form prints the eager ArgumentSet; "stream" prints every item an
ArgumentStream (with no declared keywords) yields for the remaining tokens.
"""
import sys

from rich.console import Console
from rich.pretty import pprint
from rich.rule import Rule

from .argue import ArgumentSet, Flags
from .faults import ArgotFault, trigger
from .sources import ArgvSource
from .stream import ArgumentStream

console = Console()


def main(argv=None, /):
    argv = sys.argv if argv is None else argv
    tokens = list(ArgvSource(argv))

    if tokens and tokens[0] == b"stream":
        for argument in ArgumentStream(tokens[1:]):
            console.print(Rule(style="dim"))
            pprint(argument, console=console)
        console.print(Rule(style="dim"))
        return 0

    try:
        arguments = ArgumentSet(tokens, Flags.REQUIRED)
    except ArgotFault as fault:
        return trigger(fault, shell=True)

    pprint(arguments, console=console)
    return 0


if __name__ == "__main__":
    sys.exit(main())
