#!/usr/bin/env python3
"""
Example script demonstrating the usage of ArgParser.

This script registers one optional parameter of each common type plus an int
positional parameter, all bound to the fields of a dataclass, and prints the
resulting configuration.

Try:
    python basic_example.py -i 0x20 --sparam world 7
    python basic_example.py --help
"""

import sys
from dataclasses import dataclass

from arena_argparser import ArgParser, attr_cell


@dataclass
class Config:
    """Values filled in by the parser."""

    int_param: int = 0
    uint_param: int = 0
    string_param: str = ""
    float_param: float = 0.0
    double_param: float = 0.0
    verbose: bool = False
    pos_param: int = 0


def main() -> int:
    """Main function demonstrating the parser."""
    config = Config()
    parser = ArgParser("program", "description")
    parser.set_version("v1.0.0")
    parser.set_author("Your Name")
    parser.set_date("2020/11/01/Mon")

    registrations = [
        parser.add_int(
            attr_cell(config, "int_param"), -123, "-i", "--iparam", "int_param",
            "This is int type parameter.",
        ),
        parser.add_uint(
            attr_cell(config, "uint_param"), 9999, "-u", "--uparam", "uint_param",
            "This is unsigned int type parameter.",
        ),
        parser.add_string(
            attr_cell(config, "string_param"), "hello", 32, "-s", "--sparam", "string_param",
            "This is string type parameter.",
        ),
        parser.add_float(
            attr_cell(config, "float_param"), 222.22, "-f", "--fparam", "float_param",
            "This is float type parameter.",
        ),
        parser.add_double(
            attr_cell(config, "double_param"), 333.33, "-d", "--dparam", "double_param",
            "This is double type parameter.",
        ),
        parser.add_flag(
            attr_cell(config, "verbose"), None, "--verbose", "verbose",
            "Print the parser state\nbefore the configuration.",
        ),
        parser.add_int(
            attr_cell(config, "pos_param"), -123, None, None, "int_pos_param",
            "This is int type positional parameter.",
        ),
    ]
    for registration in registrations:
        if registration.is_err():
            print(f"Error: {parser.get_error_message()}", file=sys.stderr)
            return 1

    result = parser.parse(sys.argv)
    if result.is_err():
        print(f"Error: {parser.get_error_message()}", file=sys.stderr)
        return 1
    if result.unwrap() is not None:
        return result.unwrap().code

    if config.verbose:
        parser.dump()

    print("Parsed Configuration:")
    print("-" * 30)
    print(f"int_param     : {config.int_param}")
    print(f"uint_param    : {config.uint_param}")
    print(f"string_param  : {config.string_param}")
    print(f"float_param   : {config.float_param}")
    print(f"double_param  : {config.double_param}")
    print(f"int_pos_param : {config.pos_param}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
