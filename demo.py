#!/usr/bin/env python3
"""
Demonstration of compiling and generating mazes.
"""

import logging

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ascii_render import render_description, render_generated
from maze_divider import MazeDivider, generate_description
from mdl_errors import DescriptionError
from mdl_parser import parse_description

SAMPLE = """\
[version:1.0]
[size:7,9]
[entrance:c(0,1)]
[exit:c(6,7)]
[current-position:c(5,7)]
[output-mode:python-char]
p1:e d(3) r(3) u(2) r(3) d(4);
p2:p(1,4) r;
p3:c(5,1) r(2);
v:p(1,1,9,rgb(255:0:0));
vc:rgb(0:0:255), c(5,1) > c(5,2) > c(5,3);
"""

GENERATOR_CONFIG = """\
[version:1.0]
[size:11,21]
[show-indices:false]
"""

BROKEN = """\
[version:1.0]
[size:3,3]
p1:c(1,1) l r;
"""


def main() -> None:
    """Parse a hand-written maze, then generate and re-parse a random one."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    console = Console()

    description = parse_description(SAMPLE)
    console.print(
        Panel(
            Text.from_ansi(render_description(description)),
            title=f"Hand-written maze ({description.settings.output_mode})",
        )
    )

    divider = MazeDivider(seed=7)
    generated = generate_description(GENERATOR_CONFIG, divider)
    if generated is None:
        console.print("[red]Configured maze size is too small[/red]")
        return
    regenerated = parse_description(generated)
    console.print(Panel(Text.from_ansi(render_description(regenerated, cell_width=2)), title="Generated maze"))

    raw = divider.generate(15, 7)
    if raw is not None:
        console.print(Panel(render_generated(raw), title="Raw generator output"))

    try:
        parse_description(BROKEN)
    except DescriptionError as e:
        console.print(Panel(Text(str(e), style="bold red"), title="Compilation error", border_style="red"))


if __name__ == "__main__":
    main()
