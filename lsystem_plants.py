#!/usr/bin/env python3
"""lsystem_plants.py

Deterministic L-system plants: expand a built-in grammar, walk the result with a
branching turtle, and measure the geometry.

Key features:
- Read-only catalog of plant and curve grammars.
- Generation-by-generation expansion with an optional growth limit.
- Turtle with an explicit save/restore stack; branches are depth-tagged and
  their step length decays by a per-render scale factor.
- Bounding box with an explicit empty sentinel.
- SVG output grouped by branch depth, and a seeded random picker for demos.

Run:
  python lsystem_plants.py list
  python lsystem_plants.py render plant plant.svg -n 5 --preset tapered
  python lsystem_plants.py random out.svg --seed 123
  python lsystem_plants.py --help
"""

from __future__ import annotations

import argparse
import json
import math
import os
import random
import sys
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, cast

# -------------------------
# Errors / Validation
# -------------------------


class LSystemError(ValueError):
    pass


class ConfigError(LSystemError):
    pass


class GrammarError(LSystemError):
    pass


class UnbalancedBranchError(LSystemError):
    pass


class ExpansionLimitError(LSystemError):
    pass


class UnknownGrammarError(LSystemError):
    def __init__(self, name: str) -> None:
        super().__init__(
            f"unknown grammar {name!r}; choose one of: {', '.join(grammar_names())}"
        )
        self.name = name


def _require(cond: bool, msg: str, exc: type[LSystemError] = ConfigError) -> None:
    if not cond:
        raise exc(msg)


def _as_float(x: Any, path: str) -> float:
    _require(
        isinstance(x, (int, float)) and not isinstance(x, bool),
        f"{path} must be a number",
    )
    return float(x)


def _as_int(x: Any, path: str) -> int:
    _require(
        isinstance(x, int) and not isinstance(x, bool), f"{path} must be an integer"
    )
    return int(x)


def _as_str(x: Any, path: str) -> str:
    _require(isinstance(x, str), f"{path} must be a string")
    return cast(str, x)


def _as_bool(x: Any, path: str) -> bool:
    _require(isinstance(x, bool), f"{path} must be a boolean")
    return cast(bool, x)


def _as_dict(x: Any, path: str) -> dict[str, Any]:
    _require(isinstance(x, dict), f"{path} must be an object")
    return cast(dict[str, Any], x)


# -------------------------
# Grammar model
# -------------------------

PUSH = "["
POP = "]"
TURN_LEFT = "+"
TURN_RIGHT = "-"

DRAW_SYMBOLS = frozenset("FG")
MOVE_SYMBOLS = frozenset("fg")


def _bracket_balance(word: str) -> int | None:
    """Return the number of unclosed pushes in word, or None if it ever pops
    below zero."""
    depth = 0
    for ch in word:
        if ch == PUSH:
            depth += 1
        elif ch == POP:
            depth -= 1
            if depth < 0:
                return None
    return depth


@dataclass(frozen=True)
class Grammar:
    name: str
    axiom: str
    rules: Mapping[str, str]
    turn_angle: float
    draw_symbols: frozenset[str] = DRAW_SYMBOLS
    move_symbols: frozenset[str] = MOVE_SYMBOLS
    max_iterations: int = 5
    description: str = ""

    def validate(self) -> Grammar:
        where = f"grammar {self.name!r}"
        _require(len(self.axiom) > 0, f"{where}: axiom must be non-empty", GrammarError)
        _require(
            self.max_iterations >= 0,
            f"{where}: max_iterations must be >= 0",
            GrammarError,
        )
        _require(
            _bracket_balance(self.axiom) == 0,
            f"{where}: axiom has unbalanced brackets",
            GrammarError,
        )
        for sym, repl in self.rules.items():
            _require(
                isinstance(sym, str) and len(sym) == 1,
                f"{where}: rule keys must be single characters, got {sym!r}",
                GrammarError,
            )
            _require(
                sym not in (PUSH, POP),
                f"{where}: bracket symbol {sym!r} cannot be rewritten",
                GrammarError,
            )
            _require(
                _bracket_balance(repl) == 0,
                f"{where}: rule {sym!r} -> {repl!r} has unbalanced brackets",
                GrammarError,
            )
        return self


def growth_factor(grammar: Grammar) -> int:
    """Largest right-hand side in the grammar; bounds per-generation growth.

    Never below 1: symbols without a rule carry over unchanged.
    """
    return max(1, max((len(r) for r in grammar.rules.values()), default=1))


# -------------------------
# Expansion
# -------------------------


def expand(grammar: Grammar, iterations: int, *, limit: int | None = None) -> str:
    """Rewrite the axiom `iterations` times and return the final word.

    Every symbol of a generation is replaced by its rule (or kept when it has
    none) before the next generation starts, so each pass is linear in the
    length of the word it reads.
    """
    _require(
        isinstance(iterations, int) and not isinstance(iterations, bool),
        "iterations must be an integer",
    )
    _require(iterations >= 0, "iterations must be >= 0")

    word = grammar.axiom
    rules = grammar.rules
    for generation in range(1, iterations + 1):
        word = "".join([rules.get(ch, ch) for ch in word])
        if limit is not None and len(word) > limit:
            raise ExpansionLimitError(
                f"grammar {grammar.name!r} exceeds {limit} symbols at generation "
                f"{generation} (requested {iterations})"
            )
    return word


# -------------------------
# Turtle interpreter
# -------------------------


@dataclass(frozen=True)
class RenderConfig:
    step_length: float = 10.0
    length_scale: float = 1.0
    # passed through for renderers; the turtle ignores it
    stroke_width: float = 1.0

    def validate(self) -> RenderConfig:
        _require(self.step_length > 0, "step_length must be > 0")
        _require(self.length_scale > 0, "length_scale must be > 0")
        return self


RENDER_PRESETS: Mapping[str, RenderConfig] = MappingProxyType(
    {
        "default": RenderConfig(step_length=10.0, length_scale=1.0, stroke_width=1.0),
        "tapered": RenderConfig(step_length=10.0, length_scale=0.7, stroke_width=2.0),
        "fine": RenderConfig(step_length=4.0, length_scale=0.85, stroke_width=0.5),
    }
)


@dataclass(frozen=True)
class TurtleState:
    x: float
    y: float
    heading: float
    step_length: float
    depth: int


@dataclass(frozen=True)
class Segment:
    x1: float
    y1: float
    x2: float
    y2: float
    depth: int

    @property
    def length(self) -> float:
        return math.hypot(self.x2 - self.x1, self.y2 - self.y1)


def interpret(
    symbols: Iterable[str],
    turn_angle: float,
    config: RenderConfig,
    *,
    draw: frozenset[str] = DRAW_SYMBOLS,
    move: frozenset[str] = MOVE_SYMBOLS,
) -> list[Segment]:
    """Walk symbols left to right and return the drawn segments.

    Heading 0 points along +x and positive turns are counter-clockwise (y up).
    `[` saves the whole turtle state and starts a branch one level deeper whose
    step length is scaled by config.length_scale; `]` restores the saved state.
    Symbols with no turtle meaning are ignored.
    """
    config.validate()

    state = TurtleState(0.0, 0.0, 0.0, config.step_length, 0)
    stack: list[TurtleState] = []
    out: list[Segment] = []

    for sym in symbols:
        if sym in draw or sym in move:
            rad = math.radians(state.heading)
            nx = state.x + state.step_length * math.cos(rad)
            ny = state.y + state.step_length * math.sin(rad)
            if sym in draw:
                out.append(Segment(state.x, state.y, nx, ny, state.depth))
            state = replace(state, x=nx, y=ny)
        elif sym == TURN_LEFT:
            state = replace(state, heading=state.heading + turn_angle)
        elif sym == TURN_RIGHT:
            state = replace(state, heading=state.heading - turn_angle)
        elif sym == PUSH:
            stack.append(state)
            state = replace(
                state,
                depth=state.depth + 1,
                step_length=state.step_length * config.length_scale,
            )
        elif sym == POP:
            _require(
                bool(stack),
                f"'{POP}' encountered with empty branch stack after "
                f"{len(out)} segments",
                UnbalancedBranchError,
            )
            state = stack.pop()

    return out


def group_by_depth(segments: Iterable[Segment]) -> dict[int, list[Segment]]:
    """Bucket segments by branch depth, shallowest first, keeping emission
    order inside each bucket."""
    groups: dict[int, list[Segment]] = {}
    for seg in segments:
        groups.setdefault(seg.depth, []).append(seg)
    return {d: groups[d] for d in sorted(groups)}


# -------------------------
# Bounds
# -------------------------


@dataclass(frozen=True)
class BoundingBox:
    min_x: float
    min_y: float
    max_x: float
    max_y: float
    empty: bool = False

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def contains(self, x: float, y: float) -> bool:
        if self.empty:
            return False
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def padded(self, margin: float) -> BoundingBox:
        _require(not self.empty, "cannot pad an empty bounding box")
        return BoundingBox(
            self.min_x - margin,
            self.min_y - margin,
            self.max_x + margin,
            self.max_y + margin,
        )


EMPTY_BOUNDS = BoundingBox(0.0, 0.0, 0.0, 0.0, empty=True)


def compute_bounds(segments: Iterable[Segment]) -> BoundingBox:
    min_x = min_y = math.inf
    max_x = max_y = -math.inf
    seen = False
    for seg in segments:
        seen = True
        for x, y in ((seg.x1, seg.y1), (seg.x2, seg.y2)):
            if x < min_x:
                min_x = x
            if x > max_x:
                max_x = x
            if y < min_y:
                min_y = y
            if y > max_y:
                max_y = y
    if not seen:
        return EMPTY_BOUNDS
    return BoundingBox(min_x, min_y, max_x, max_y)


# -------------------------
# Catalog
# -------------------------


def _build_catalog(*grammars: Grammar) -> Mapping[str, Grammar]:
    table: dict[str, Grammar] = {}
    for g in grammars:
        _require(g.name not in table, f"duplicate grammar {g.name!r}", GrammarError)
        table[g.name] = g.validate()
    return MappingProxyType(table)


CATALOG: Mapping[str, Grammar] = _build_catalog(
    Grammar(
        name="plant",
        axiom="X",
        rules=MappingProxyType({"X": "F+[[X]-X]-F[-FX]+X", "F": "FF"}),
        turn_angle=25.0,
        max_iterations=6,
        description="fractal plant with a leaning stem",
    ),
    Grammar(
        name="bush",
        axiom="F",
        rules=MappingProxyType({"F": "FF+[+F-F-F]-[-F+F+F]"}),
        turn_angle=22.5,
        max_iterations=4,
        description="dense shrub",
    ),
    Grammar(
        name="weed",
        axiom="X",
        rules=MappingProxyType({"X": "F[+X]F[-X]+X", "F": "FF"}),
        turn_angle=20.0,
        max_iterations=7,
        description="alternating weed",
    ),
    Grammar(
        name="twig",
        axiom="F",
        rules=MappingProxyType({"F": "F[+F]F[-F]F"}),
        turn_angle=25.7,
        max_iterations=5,
        description="symmetric twig",
    ),
    Grammar(
        name="koch",
        axiom="F",
        rules=MappingProxyType({"F": "F+F--F+F"}),
        turn_angle=60.0,
        max_iterations=5,
        description="Koch curve",
    ),
    Grammar(
        name="sierpinski",
        axiom="F-G-G",
        rules=MappingProxyType({"F": "F-G+F+G-F", "G": "GG"}),
        turn_angle=120.0,
        max_iterations=6,
        description="Sierpinski triangle",
    ),
    Grammar(
        name="dragon",
        axiom="F",
        rules=MappingProxyType({"F": "F+G", "G": "F-G"}),
        turn_angle=90.0,
        max_iterations=12,
        description="Heighway dragon",
    ),
)


def grammar_names() -> list[str]:
    return sorted(CATALOG)


def get_grammar(name: str) -> Grammar:
    try:
        return CATALOG[name]
    except KeyError:
        raise UnknownGrammarError(name) from None


def render(
    grammar_name: str,
    iterations: int,
    config: RenderConfig,
    *,
    limit: int | None = None,
) -> tuple[list[Segment], BoundingBox]:
    """Expand a catalog grammar, walk it, and return (segments, bounds)."""
    grammar = get_grammar(grammar_name)
    config.validate()
    symbols = expand(grammar, iterations, limit=limit)
    segments = interpret(
        symbols,
        grammar.turn_angle,
        config,
        draw=grammar.draw_symbols,
        move=grammar.move_symbols,
    )
    return segments, compute_bounds(segments)


# -------------------------
# SVG writing
# -------------------------


@dataclass(frozen=True)
class SvgStyle:
    stroke: str = "#2f5d1e"
    stroke_linecap: str = "round"
    stroke_linejoin: str = "round"


@dataclass(frozen=True)
class SvgOptions:
    margin: float = 10.0
    precision: int = 3
    flip_y: bool = True
    # plants grow along +x; rotate them upright
    rotate: float = 90.0
    width: float | None = None
    height: float | None = None
    background: str | None = None
    depth_fade: float = 1.0
    style: SvgStyle = field(default_factory=SvgStyle)


def _ensure_parent_dir(path: str) -> None:
    os.makedirs(os.path.dirname(os.path.abspath(path)) or ".", exist_ok=True)


def _fmt(x: float, precision: int) -> str:
    # Normalise -0.0 so it never produces "-0" in SVG output.
    if not x:
        x = 0.0
    s = f"{x:.{precision}f}"
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    if s in ("-0", ""):
        s = "0"
    return s


def _escape(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def rotate_segments(segments: Iterable[Segment], angle_deg: float) -> list[Segment]:
    """Rotate segments counter-clockwise about the origin."""
    if not angle_deg:
        return list(segments)
    rad = math.radians(angle_deg)
    c, s = math.cos(rad), math.sin(rad)
    return [
        Segment(
            c * seg.x1 - s * seg.y1,
            s * seg.x1 + c * seg.y1,
            c * seg.x2 - s * seg.y2,
            s * seg.x2 + c * seg.y2,
            seg.depth,
        )
        for seg in segments
    ]


def write_svg(
    segments: list[Segment],
    *,
    out_path: str,
    options: SvgOptions,
    stroke_width: float,
    title: str | None = None,
) -> None:
    _require(stroke_width > 0, "stroke_width must be > 0")
    segments = rotate_segments(segments, options.rotate)
    bounds = compute_bounds(segments)

    p = options.precision
    svg_w_attr = f' width="{_fmt(options.width, p)}"' if options.width else ""
    svg_h_attr = f' height="{_fmt(options.height, p)}"' if options.height else ""

    lines: list[str] = []
    lines.append('<?xml version="1.0" encoding="UTF-8"?>')

    if bounds.empty:
        # Nothing to draw: an empty document with no viewBox.
        lines.append(
            "<svg xmlns=\"http://www.w3.org/2000/svg\" version=\"1.1\""
            f"{svg_w_attr}{svg_h_attr}>"
        )
        if title:
            lines.append(f"  <title>{_escape(title)}</title>")
        lines.append("</svg>")
        _write_lines(out_path, lines)
        return

    box = bounds.padded(options.margin)
    _require(
        box.width > 0 and box.height > 0,
        "Degenerate bounds after margin (width or height is zero). "
        "Set margin > 0 to render collinear geometry.",
    )
    view_box = (
        f"{_fmt(box.min_x, p)} {_fmt(box.min_y, p)} "
        f"{_fmt(box.width, p)} {_fmt(box.height, p)}"
    )

    lines.append(
        "<svg xmlns=\"http://www.w3.org/2000/svg\" version=\"1.1\" "
        f"viewBox=\"{view_box}\"{svg_w_attr}{svg_h_attr}>"
    )
    if title:
        lines.append(f"  <title>{_escape(title)}</title>")

    if options.background and options.background.lower() != "none":
        lines.append(
            f'  <rect x="{_fmt(box.min_x, p)}" y="{_fmt(box.min_y, p)}" '
            f'width="{_fmt(box.width, p)}" height="{_fmt(box.height, p)}" '
            f'fill="{_escape(options.background)}" />'
        )

    if options.flip_y:
        # Mirror about the box centre line: translate(0, miny+maxy) scale(1,-1).
        lines.append(
            f'  <g transform="translate(0,{_fmt(box.min_y + box.max_y, p)}) '
            'scale(1,-1)">'
        )
        indent = "    "
    else:
        indent = "  "

    style = options.style
    for depth, group in group_by_depth(segments).items():
        width = stroke_width * options.depth_fade**depth
        lines.append(
            f'{indent}<g data-depth="{depth}" stroke="{_escape(style.stroke)}" '
            f'stroke-width="{_fmt(width, p)}" '
            f'stroke-linecap="{_escape(style.stroke_linecap)}" '
            f'stroke-linejoin="{_escape(style.stroke_linejoin)}">'
        )
        for seg in group:
            lines.append(
                f'{indent}  <line x1="{_fmt(seg.x1, p)}" y1="{_fmt(seg.y1, p)}" '
                f'x2="{_fmt(seg.x2, p)}" y2="{_fmt(seg.y2, p)}" />'
            )
        lines.append(f"{indent}</g>")

    if options.flip_y:
        lines.append("  </g>")
    lines.append("</svg>")
    _write_lines(out_path, lines)


def _write_lines(out_path: str, lines: list[str]) -> None:
    _ensure_parent_dir(out_path)
    with open(out_path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines))
        f.write("\n")


# -------------------------
# Options parsing
# -------------------------

_OPTION_KEYS = frozenset(
    (
        "margin",
        "precision",
        "flip_y",
        "rotate",
        "width",
        "height",
        "background",
        "depth_fade",
        "style",
    )
)
_STYLE_KEYS = frozenset(("stroke", "stroke_linecap", "stroke_linejoin"))


def parse_svg_options(obj: dict[str, Any]) -> SvgOptions:
    obj = _as_dict(obj, "options")
    unknown = sorted(set(obj) - _OPTION_KEYS)
    _require(not unknown, f"unknown option keys: {', '.join(unknown)}")

    defaults = SvgOptions()
    margin = _as_float(obj.get("margin", defaults.margin), "margin")
    _require(margin >= 0, "margin must be >= 0")
    precision = _as_int(obj.get("precision", defaults.precision), "precision")
    _require(0 <= precision <= 10, "precision must be between 0 and 10")
    flip_y = _as_bool(obj.get("flip_y", defaults.flip_y), "flip_y")
    rotate = _as_float(obj.get("rotate", defaults.rotate), "rotate")

    width = obj.get("width")
    height = obj.get("height")
    if width is not None:
        width = _as_float(width, "width")
        _require(width > 0, "width must be > 0")
    if height is not None:
        height = _as_float(height, "height")
        _require(height > 0, "height must be > 0")

    background = obj.get("background")
    if background is not None:
        background = _as_str(background, "background")

    depth_fade = _as_float(obj.get("depth_fade", defaults.depth_fade), "depth_fade")
    _require(0 < depth_fade <= 1, "depth_fade must be in (0, 1]")

    style_obj = _as_dict(obj.get("style", {}), "style")
    unknown = sorted(set(style_obj) - _STYLE_KEYS)
    _require(not unknown, f"unknown style keys: {', '.join(unknown)}")
    base = defaults.style
    style = SvgStyle(
        stroke=_as_str(style_obj.get("stroke", base.stroke), "style.stroke"),
        stroke_linecap=_as_str(
            style_obj.get("stroke_linecap", base.stroke_linecap),
            "style.stroke_linecap",
        ),
        stroke_linejoin=_as_str(
            style_obj.get("stroke_linejoin", base.stroke_linejoin),
            "style.stroke_linejoin",
        ),
    )

    return SvgOptions(
        margin=margin,
        precision=precision,
        flip_y=flip_y,
        rotate=rotate,
        width=width,
        height=height,
        background=background,
        depth_fade=depth_fade,
        style=style,
    )


def load_json(path: str) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        try:
            return cast(dict[str, Any], json.load(f))
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {path}: {e}") from e


def load_svg_options(path: str | None) -> SvgOptions:
    if path is None:
        return SvgOptions()
    return parse_svg_options(load_json(path))


# -------------------------
# Random selection
# -------------------------


@dataclass(frozen=True)
class RandomPick:
    grammar: str
    iterations: int
    preset: str


def choose_random(rng: random.Random) -> RandomPick:
    """Pick a grammar, an iteration count and a preset for the demo command."""
    name = rng.choice(grammar_names())
    grammar = CATALOG[name]
    iterations = rng.randint(1, max(1, grammar.max_iterations))
    preset = rng.choice(sorted(RENDER_PRESETS))
    return RandomPick(grammar=name, iterations=iterations, preset=preset)


# -------------------------
# CLI / Help
# -------------------------

HELP_EPILOG = r"""
GRAMMARS

  Grammars are built in; run `list` to see them. Symbols:

    F G   move forward and draw
    f g   move forward without drawing
    +     turn left by the grammar's angle
    -     turn right by the grammar's angle
    [     save the turtle; the branch is one level deeper and its step
          length is multiplied by the scale factor
    ]     restore the last saved turtle
    other symbols (X, ...) are rewritten but never drawn

RENDER SETTINGS

  --preset selects step length, scale and stroke width:
    default   step 10, scale 1.0,  stroke 1.0
    tapered   step 10, scale 0.7,  stroke 2.0
    fine      step 4,  scale 0.85, stroke 0.5
  --step, --scale and --stroke-width override the preset.

SVG OPTIONS (--options FILE)

  A JSON object; every key is optional.

    margin: number >= 0 (default 10)
    precision: integer 0..10 (default 3)
    flip_y: boolean (default true)
        Wrap the drawing in a y-flip so turtle math stays Cartesian.
    rotate: degrees (default 90)
        Rotate the drawing counter-clockwise; 90 makes plants grow upward.
    width / height: number (optional)
    background: color (optional)
    depth_fade: number in (0, 1] (default 1)
        Stroke width multiplier applied once per branch depth.
    style: {"stroke", "stroke_linecap", "stroke_linejoin"}

Example

    {"margin": 5, "depth_fade": 0.7, "background": "#fff",
     "style": {"stroke": "#553311"}}
"""


def _add_render_settings(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "-n",
        "--iterations",
        type=int,
        default=None,
        help="Rewriting steps (default: the grammar's max_iterations).",
    )
    p.add_argument(
        "--preset",
        choices=sorted(RENDER_PRESETS),
        default="default",
        help="Named render settings.",
    )
    p.add_argument("--step", type=float, default=None, help="Base step length.")
    p.add_argument(
        "--scale", type=float, default=None, help="Step length factor per branch."
    )
    p.add_argument(
        "--stroke-width", type=float, default=None, help="Base stroke width."
    )


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="lsystem-plants",
        description="Render built-in L-system plants to SVG.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=HELP_EPILOG,
    )

    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("list", help="List the built-in grammars.")

    pr = sub.add_parser("render", help="Render a grammar to an SVG file.")
    pr.add_argument("grammar", help="Grammar name (see `list`).")
    pr.add_argument("output", help="Path to write the SVG output.")
    _add_render_settings(pr)
    pr.add_argument("--options", default=None, help="JSON file with SVG options.")

    pv = sub.add_parser(
        "validate", help="Expand and interpret a grammar and print statistics."
    )
    pv.add_argument("grammar", help="Grammar name (see `list`).")
    _add_render_settings(pv)

    pg = sub.add_parser("random", help="Render a randomly chosen grammar.")
    pg.add_argument("output", help="Path to write the SVG output.")
    pg.add_argument(
        "--seed", type=int, default=None, help="Seed for repeatable randomness."
    )
    pg.add_argument("--options", default=None, help="JSON file with SVG options.")

    return p


def _render_config(args: argparse.Namespace) -> RenderConfig:
    cfg = RENDER_PRESETS[args.preset]
    overrides: dict[str, float] = {}
    if args.step is not None:
        overrides["step_length"] = args.step
    if args.scale is not None:
        overrides["length_scale"] = args.scale
    if args.stroke_width is not None:
        overrides["stroke_width"] = args.stroke_width
    cfg = replace(cfg, **overrides).validate()
    _require(cfg.stroke_width > 0, "stroke_width must be > 0")
    return cfg


def _iterations(args: argparse.Namespace, grammar: Grammar) -> int:
    if args.iterations is None:
        return grammar.max_iterations
    return cast(int, args.iterations)


# -------------------------
# Commands
# -------------------------

_CLI_SYMBOL_LIMIT = 1_000_000


def cmd_list() -> None:
    for name in grammar_names():
        g = CATALOG[name]
        print(
            f"{name:<12} angle={_fmt(g.turn_angle, 2):<6} "
            f"max_iterations={g.max_iterations:<3} {g.description}"
        )


def cmd_render(
    name: str,
    iterations: int,
    config: RenderConfig,
    output_path: str,
    options: SvgOptions,
) -> None:
    segments, _ = render(name, iterations, config, limit=_CLI_SYMBOL_LIMIT)
    write_svg(
        segments,
        out_path=output_path,
        options=options,
        stroke_width=config.stroke_width,
        title=f"{name} (n={iterations})",
    )


def cmd_validate(name: str, iterations: int, config: RenderConfig) -> None:
    grammar = get_grammar(name)
    symbols = expand(grammar, iterations, limit=_CLI_SYMBOL_LIMIT)
    segments = interpret(
        symbols,
        grammar.turn_angle,
        config,
        draw=grammar.draw_symbols,
        move=grammar.move_symbols,
    )
    bounds = compute_bounds(segments)
    depths = group_by_depth(segments)

    print(f"grammar: {grammar.name}")
    print(f"iterations: {iterations}")
    print(f"angle: {_fmt(grammar.turn_angle, 3)}")
    print(f"growth factor: {growth_factor(grammar)}")
    print(f"symbols: {len(symbols)}")
    print(f"segments: {len(segments)}")
    counts = " ".join(f"{d}:{len(g)}" for d, g in depths.items())
    print(f"depths: {counts or '-'}")
    if bounds.empty:
        print("bounds: empty")
    else:
        print(
            "bounds: "
            + " ".join(
                _fmt(v, 3)
                for v in (bounds.min_x, bounds.min_y, bounds.max_x, bounds.max_y)
            )
        )


def cmd_random(output_path: str, seed: int | None, options: SvgOptions) -> None:
    pick = choose_random(random.Random(seed))
    print(f"{pick.grammar} n={pick.iterations} preset={pick.preset}")
    cmd_render(
        pick.grammar,
        pick.iterations,
        RENDER_PRESETS[pick.preset],
        output_path,
        options,
    )


def main(argv: list[str] | None = None) -> int:
    ap = build_argparser()
    args = ap.parse_args(argv)

    try:
        if args.cmd == "list":
            cmd_list()
        elif args.cmd == "render":
            grammar = get_grammar(args.grammar)
            cmd_render(
                grammar.name,
                _iterations(args, grammar),
                _render_config(args),
                args.output,
                load_svg_options(args.options),
            )
        elif args.cmd == "validate":
            grammar = get_grammar(args.grammar)
            cmd_validate(grammar.name, _iterations(args, grammar), _render_config(args))
        elif args.cmd == "random":
            cmd_random(args.output, args.seed, load_svg_options(args.options))
        else:
            raise AssertionError("unreachable")
    except LSystemError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"File error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
