#!/usr/bin/env python3
"""
icvm - Intcode VM Command Line
==============================

One CLI for every way of driving the VM:
    icvm run      - Run a program with batch input, print its outputs
    icvm amplify  - Find the best amplifier phase order (chain or feedback)
    icvm network  - Boot a network of NICs and watch the idle monitor
    icvm ascii    - Talk to an ASCII program (script file or interactive)
    icvm arcade   - Play the arcade cabinet with the auto-joystick
    icvm disasm   - Disassemble a program image

Usage:
    icvm <command> PROGRAM [options]
    icvm <command> --help

Examples:
    icvm run day05.txt -i 1
    icvm run day09.txt --profile boost-test --profile boost
    icvm run day02.txt --patch 1=12 --patch 2=2 --peek 0
    icvm amplify day07.txt --both
    icvm network day23.txt
    icvm ascii day21.txt --script walk.springscript
    icvm arcade day13.txt --free-play --display
    icvm disasm day09.txt --start 0 --count 20

Exit codes: 0 ok, 1 program/input error (a failing part does not stop
the next one), 2 internal error.
"""

import argparse
import logging
import sys
import time

from rich.console import Console

from intcode_vm import __version__
from intcode_vm.channels import BatchQueue, TileScreen, Tile
from intcode_vm.config import (
    CHAIN_PHASES, FEEDBACK_PHASES, FREE_PLAY_PATCH, MONITOR_ADDRESS,
    NETWORK_SIZE, PROFILES, DISPLAY_FRAME_SECONDS, LOGGER_NAME,
)
from intcode_vm.disasm import disassemble
from intcode_vm.emu import IntcodeEngine, StopReason
from intcode_vm.errors import IntcodeError
from intcode_vm.harness import (
    max_thruster_signal, Network, play, TextSession,
)
from intcode_vm.loader import load_program, patch_program, parse_patch
from intcode_vm.log_setup import setup_logging, reset_logging

log = logging.getLogger("intcode_vm.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="icvm",
        description="Intcode VM - run, chain, network and disassemble Intcode programs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""commands:
  run        Run a program with batch input
  amplify    Search amplifier phase orders
  network    Simulate a NIC network with an idle monitor
  ascii      Drive an ASCII program from a script or the keyboard
  arcade     Play the arcade cabinet
  disasm     Disassemble a program
""",
    )
    parser.add_argument("--version", action="version", version=f"icvm {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="More console logging (-v info, -vv debug)")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="Only log errors to the console")
    parser.add_argument("--log-file", default=None,
                        help="Also write a full DEBUG log to this file")
    sub = parser.add_subparsers(dest="command", metavar="command")

    # ── run ──────────────────────────────────────────────────────────────
    p_run = sub.add_parser("run", help="Run a program with batch input")
    p_run.add_argument("program", help="Program file (comma-separated integers)")
    p_run.add_argument("-i", "--input", dest="inputs", default="",
                       help="Comma-separated input values, e.g. 1,5")
    p_run.add_argument("--patch", action="append", default=[], metavar="ADDR=VAL",
                       help="Write VAL at ADDR before running (repeatable)")
    p_run.add_argument("--profile", action="append", default=[], choices=sorted(PROFILES),
                       help="Named input/patch preset; each profile is a separate run")
    p_run.add_argument("--peek", action="append", type=int, default=[], metavar="ADDR",
                       help="Print memory at ADDR after the run (repeatable)")
    p_run.add_argument("--trace", action="store_true",
                       help="Print an instruction trace to stderr")

    # ── amplify ──────────────────────────────────────────────────────────
    p_amp = sub.add_parser("amplify", help="Search amplifier phase orders")
    p_amp.add_argument("program", help="Program file")
    p_amp.add_argument("--phases", default=None, metavar="LO-HI",
                       help="Phase range, inclusive (default 0-4, or 5-9 with --feedback)")
    mode = p_amp.add_mutually_exclusive_group()
    mode.add_argument("--feedback", action="store_true", help="Feedback loop instead of a chain")
    mode.add_argument("--both", action="store_true", help="Chain with default phases, then feedback")

    # ── network ──────────────────────────────────────────────────────────
    p_net = sub.add_parser("network", help="Simulate a NIC network")
    p_net.add_argument("program", help="Program file")
    p_net.add_argument("--size", type=int, default=NETWORK_SIZE,
                       help=f"Number of nodes (default: {NETWORK_SIZE})")
    p_net.add_argument("--monitor", type=int, default=MONITOR_ADDRESS,
                       help=f"Idle monitor address (default: {MONITOR_ADDRESS})")

    # ── ascii ────────────────────────────────────────────────────────────
    p_txt = sub.add_parser("ascii", help="Drive an ASCII program")
    p_txt.add_argument("program", help="Program file")
    p_txt.add_argument("--script", default=None, help="Text file fed as input")
    p_txt.add_argument("--interactive", action="store_true",
                       help="Read further command lines from stdin")
    p_txt.add_argument("--echo", action="store_true",
                       help="Echo input and output character by character")
    p_txt.add_argument("--patch", action="append", default=[], metavar="ADDR=VAL")

    # ── arcade ───────────────────────────────────────────────────────────
    p_arc = sub.add_parser("arcade", help="Play the arcade cabinet")
    p_arc.add_argument("program", help="Program file")
    p_arc.add_argument("--free-play", action="store_true",
                       help="Insert quarters (patch address 0) and play to the end")
    p_arc.add_argument("--display", action="store_true", help="Draw the screen every frame")

    # ── disasm ───────────────────────────────────────────────────────────
    p_dis = sub.add_parser("disasm", help="Disassemble a program")
    p_dis.add_argument("program", help="Program file")
    p_dis.add_argument("--start", type=int, default=0, help="First address (default: 0)")
    p_dis.add_argument("--count", type=int, default=None, help="Maximum entries")

    return parser


# ═════════════════════════════════════════════════════════════════════════════
# HELPERS
# ═════════════════════════════════════════════════════════════════════════════

def _parse_values(text):
    """'1, 2,3' -> [1, 2, 3]; empty text -> []."""
    return [int(v) for v in text.replace(" ", "").split(",") if v]


def _parse_range(text):
    """'5-9' -> range(5, 10). A leading '-' belongs to the low bound."""
    lo, sep, hi = text.partition("-")
    if lo == "":
        lo, sep, hi = hi.partition("-")
        lo = "-" + lo
    if not sep:
        raise ValueError(f"Phase range must look like LO-HI, got {text!r}")
    return range(int(lo), int(hi) + 1)


def _patches(specs):
    patches = {}
    for spec in specs:
        patches.update(parse_patch(spec))
    return patches


def _report_failure(part, error):
    log.error("%s: %s", part, error)
    print(f"{part}: Program failed ({error})", file=sys.stderr)


# ═════════════════════════════════════════════════════════════════════════════
# COMMAND IMPLEMENTATIONS
# ═════════════════════════════════════════════════════════════════════════════

# ── run ──────────────────────────────────────────────────────────────────
def _run_once(program, label, inputs, patches, peek, trace):
    engine = IntcodeEngine(patch_program(program, patches))
    if trace:
        engine.enable_trace()
    io = BatchQueue(inputs)
    reason = engine.run(io)
    if trace:
        print(engine.get_trace(), file=sys.stderr)

    if reason is StopReason.FAULTED:
        _report_failure(label, engine.fault)
        return False

    log.info("%s: halted after %d steps, %d outputs", label, engine.state.steps, len(io.outputs))
    prefix = f"{label}: " if label != "run" else ""
    for value in io.outputs:
        print(f"{prefix}{value}")
    for addr in peek or ([] if io.outputs else [0]):
        print(f"{prefix}mem[{addr}] = {engine.mem.read(addr)}")
    return True


def cmd_run(args, program):
    inputs = _parse_values(args.inputs)
    patches = _patches(args.patch)
    if not args.profile:
        return _run_once(program, "run", inputs, patches, args.peek, args.trace)

    ok = True
    for name in args.profile:
        profile = PROFILES[name]
        merged = dict(profile["patches"])
        merged.update(patches)
        ok &= _run_once(program, name, list(profile["inputs"]) + inputs,
                        merged, args.peek, args.trace)
    return ok


# ── amplify ──────────────────────────────────────────────────────────────
def _amplify(program, phases, feedback):
    label = "feedback" if feedback else "chain"
    best = max_thruster_signal(program, phases, feedback=feedback)
    if best is None:
        _report_failure(label, f"no phase order in {phases.start}-{phases.stop - 1} completed")
        return False
    print(f"{label}: {best}")
    return True


def cmd_amplify(args, program):
    if args.both:
        ok = _amplify(program, CHAIN_PHASES, False)
        return _amplify(program, FEEDBACK_PHASES, True) and ok
    if args.phases:
        phases = _parse_range(args.phases)
    else:
        phases = FEEDBACK_PHASES if args.feedback else CHAIN_PHASES
    return _amplify(program, phases, args.feedback)


# ── network ──────────────────────────────────────────────────────────────
def cmd_network(args, program):
    result = Network(program, size=args.size, monitor_address=args.monitor).run()
    print(f"first monitor packet: x={result.first_monitor_packet[0]} "
          f"y={result.first_monitor_packet[1]}")
    print(f"repeated packet: x={result.repeated_packet[0]} y={result.repeated_packet[1]}")
    log.info("Routed %d packets, intercepted %d, %d replays",
             result.packets_routed, result.packets_intercepted, result.replays)
    return True


# ── ascii ────────────────────────────────────────────────────────────────
def cmd_ascii(args, program):
    echo = None
    if args.echo:
        def echo(ch):
            sys.stdout.write(ch)
            sys.stdout.flush()

    session = TextSession(program, echo=echo, patches=_patches(args.patch))
    if args.script:
        with open(args.script, "r", encoding="utf-8") as f:
            session.stream.feed(f.read())

    text = session.resume()
    if not args.echo:
        sys.stdout.write(text)

    if args.interactive:
        for line in sys.stdin:
            if session.finished:
                break
            text = session.send(line.rstrip("\n"))
            if not args.echo:
                sys.stdout.write(text)

    if session.result is not None:
        print(f"result: {session.result}")
    elif not session.finished:
        log.warning("Program is still waiting for input")
    return True


# ── arcade ───────────────────────────────────────────────────────────────
def cmd_arcade(args, program):
    display = None
    if args.display:
        console = Console()

        def display(frame):
            console.clear()
            console.print(frame, highlight=False)
            if DISPLAY_FRAME_SECONDS:
                time.sleep(DISPLAY_FRAME_SECONDS)

    screen = TileScreen(display=display)
    patches = FREE_PLAY_PATCH if args.free_play else None
    reason = play(program, screen, patches=patches)
    if reason is not StopReason.HALTED:
        _report_failure("arcade", f"game stopped ({reason.value})")
        return False

    print(f"blocks: {screen.count(Tile.BLOCK)}")
    if args.free_play:
        print(f"score: {screen.score}")
    return True


# ── disasm ───────────────────────────────────────────────────────────────
def cmd_disasm(args, program):
    for entry in disassemble(program, start=args.start, count=args.count):
        print(entry.format())
    return True


# ═════════════════════════════════════════════════════════════════════════════
# COMMAND DISPATCH TABLE
# ═════════════════════════════════════════════════════════════════════════════

COMMANDS = {
    "run": cmd_run,
    "amplify": cmd_amplify,
    "network": cmd_network,
    "ascii": cmd_ascii,
    "arcade": cmd_arcade,
    "disasm": cmd_disasm,
}


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    if args.quiet:
        console_level = logging.ERROR
    elif args.verbose >= 2:
        console_level = logging.DEBUG
    elif args.verbose == 1:
        console_level = logging.INFO
    else:
        console_level = logging.WARNING
    reset_logging(LOGGER_NAME)
    setup_logging(LOGGER_NAME, console_level=console_level, log_file=args.log_file)

    try:
        program = load_program(args.program)
    except OSError as e:
        print(f"Cannot read program: {e}", file=sys.stderr)
        return 1
    except IntcodeError as e:
        print(f"Bad program file {args.program}: {e}", file=sys.stderr)
        return 1

    handler = COMMANDS[args.command]
    try:
        ok = handler(args, program)
    except (IntcodeError, ValueError) as e:
        _report_failure(args.command, e)
        return 1
    except Exception as e:
        log.exception("Internal error in %s", args.command)
        print(f"Internal error: {e}", file=sys.stderr)
        return 2
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
