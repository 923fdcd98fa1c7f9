# main.py

import sys
import random
import argparse
from pathlib import Path

# Add the src directory to the Python path
sys.path.insert(0, str(Path(__file__).resolve().parent))

import common
import emulator as em
import framebuf as fb
import loader
import state as st


def load_file(es, file_path):
    try:
        image = loader.read_image(file_path)
        loader.boot(es, image)
        print(f"Loaded {len(image)} bytes from {file_path}")
        return True
    except FileNotFoundError:
        print(f"Error: File not found at {file_path}")
        return False
    except ValueError as e:
        print(f"Error: {e}")
        return False


def run_file(file_path, cycles=common.default_cycle_limit,
             ipf=common.default_instructions_per_frame, seed=None,
             show_display=False, dump_regs=False, verbose=False):
    if verbose:
        common.mode.set_trace()

    rng = random.Random(seed)
    es = st.MachineState(random_byte=lambda: rng.randrange(256))
    if not load_file(es, file_path):
        return 1

    print("\n--- Running Emulator ---")
    result = em.run(es, max_instructions=cycles, instructions_per_tick=ipf)
    exit_code = 0
    if result is None:
        print("No instructions executed.")
    elif es.status == st.STATUS_HALTED:
        print(f"Program halted at {result.show()}")
    elif result.kind == st.EX_BLOCKED:
        print(f"Program is waiting for a key at {result.show()}; no input in headless mode.")
    elif result.is_error:
        print(f"Emulator stopped: {result.show()}")
        exit_code = 1
    else:
        print(f"Emulator stopped after {cycles} instructions (limit reached).")
    print("------------------------")

    if show_display:
        print(fb.show_display(es))
    if dump_regs:
        em.dump_registers(es)
    return exit_code


def gui_file(file_path, ipf, scale):
    # The GUI pulls in PySide6, so it is only imported when asked for
    import gui
    return gui.start_gui(file_path, ipf, scale)


def main(argv=None):
    parser = argparse.ArgumentParser(prog="chip8py", description="CHIP-8 virtual machine")
    parser.add_argument("--version", action="version", version=f"%(prog)s {common.CHIP8PY_VERSION}")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run command
    run_parser = subparsers.add_parser("run", help="Run a program image without a display window")
    run_parser.add_argument("file", help="Path to the program image")
    run_parser.add_argument("--cycles", type=int, default=common.default_cycle_limit,
                            help="Maximum number of instructions to execute")
    run_parser.add_argument("--ipf", type=int, default=common.default_instructions_per_frame,
                            help="Instructions per 60 Hz timer tick")
    run_parser.add_argument("--seed", type=int, default=None, help="Seed for the random number source")
    run_parser.add_argument("--show-display", action="store_true", help="Print the display after execution")
    run_parser.add_argument("--reg-dump", action="store_true", help="Dump registers after execution")
    run_parser.add_argument("--verbose", action="store_true", help="Enable the instruction trace")

    # GUI command
    gui_parser = subparsers.add_parser("gui", help="Run a program image in a window")
    gui_parser.add_argument("file", nargs="?", help="Path to the program image")
    gui_parser.add_argument("--ipf", type=int, default=common.default_instructions_per_frame,
                            help="Instructions per 60 Hz frame")
    gui_parser.add_argument("--scale", type=int, default=common.default_scale,
                            help="Screen pixels per CHIP-8 pixel")

    args = parser.parse_args(argv)

    if args.command == "run":
        if args.cycles < 0 or args.ipf < 1:
            parser.error("--cycles must be >= 0 and --ipf must be >= 1")
        try:
            return run_file(args.file, args.cycles, args.ipf, args.seed,
                            args.show_display, args.reg_dump, args.verbose)
        finally:
            common.mode.clear_trace()
    elif args.command == "gui":
        if args.ipf < 1 or args.scale < 1:
            parser.error("--ipf and --scale must be >= 1")
        return gui_file(args.file, args.ipf, args.scale)
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
