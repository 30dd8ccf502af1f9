import sys
import logging as lg
from pathlib import Path

import click

from chip8.constants import SCALE_FACTOR
from chip8.errors import LoadError, ExecutionFault
from chip8.machine import Chip8


EXIT_OK = 0
EXIT_LOAD_ERROR = 1
EXIT_KEYBOARD = 3
EXIT_EXEC_ERROR = 100


def parse_color(value):
    value = value.lstrip('#')
    if len(value) != 6:
        raise click.BadParameter('expected a color like FFFFFF')
    try:
        return tuple(int(value[i:i + 2], 16) for i in (0, 2, 4))
    except ValueError as e:
        raise click.BadParameter('expected a color like FFFFFF') from e


@click.command()
@click.argument('rom_filename', type=Path)
@click.option('--eti660', is_flag=True, help='Load as an ETI 660 program (2K RAM, starts at 0x600).')
@click.option('--no-hires-quirk', is_flag=True, help='Do not treat JP 0x260 at 0x200 as a hi-res switch.')
@click.option('--scale', type=int, default=SCALE_FACTOR, show_default=True, help='Window pixels per CHIP-8 pixel.')
@click.option('--on-color', default='FFFFFF', show_default=True, help='Color of lit pixels.')
@click.option('--off-color', default='000000', show_default=True, help='Background color.')
@click.option('--debug', is_flag=True, help='Start with the register overlay shown.')
@click.option('--dump', type=Path, default=None, help='Write a machine state dump here on exit or fault.')
@click.option('--log-level', default='INFO', show_default=True,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False))
def run(rom_filename, eti660, no_hires_quirk, scale, on_color, off_color, debug, dump, log_level):
    lg.basicConfig(level=log_level.upper())
    lg.info("CHIP-8")

    pixel_on = parse_color(on_color)
    pixel_off = parse_color(off_color)

    machine = Chip8(hires_quirk=not no_hires_quirk)
    try:
        machine.load_program(rom_filename, eti660)
    except LoadError as e:
        lg.error('Program load error - exiting: %s', e)
        sys.exit(EXIT_LOAD_ERROR)

    # pygame only once there is a program to show
    import chip8.frontend as frontend

    window = frontend.init_pygame(scale)
    try:
        machine.set_beep(frontend.Beeper())
    except frontend.pygame.error as e:
        lg.warning('No sound: %s', e)
    machine.set_debug_mode(debug)

    try:
        lg.info("Running program...")
        frontend.run(machine, window, pixel_on, pixel_off)
        status = EXIT_OK

    except ExecutionFault as e:
        lg.error('Program execution error - exiting: %s', e)
        status = EXIT_EXEC_ERROR

    except KeyboardInterrupt:
        lg.info('Execution halted by the user')
        status = EXIT_KEYBOARD

    finally:
        if dump is not None and machine.computer is not None:
            machine.computer.debug_dump(dump)
        frontend.pygame.quit()

    sys.exit(status)


if __name__ == '__main__':
    run()
