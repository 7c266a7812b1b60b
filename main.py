import sys

from rich.pretty import pprint

from clopts import *

LONG = Arg("long", short="l")
VERBOSE = Arg("verbose", short="v")
COUNT = Arg("count", short="c", takes_value=TakesValue.NECESSARY)

ARGS = Args(LONG, VERBOSE, COUNT)


if __name__ == '__main__':
    try:
        matches = parse(ARGS)
    except ParseError as error:
        trigger(error, shell=True)
    pprint(matches)
    pprint({
        "long": matches.flags.has(LONG),
        "verbose": matches.flags.count(VERBOSE),
        "count": matches.flags.get(COUNT),
    })
