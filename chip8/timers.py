import time

from chip8.constants import TIMER_PERIOD


class TimerSubsystem:
    '''
    Counts the delay and sound registers down at 60 Hz of wall-clock time, independent
    of how many instructions run in between.

    An accumulator starts at one timer period and is drained by the time elapsed since
    the previous update.  Once it has reached zero, the next update decrements both
    registers (never below 0), tells the sound sink whether to keep beeping and starts
    a new period.
    '''

    def __init__(self, registers, beep=None, clock=time.perf_counter, period=TIMER_PERIOD):
        self.registers = registers
        self.beep = beep
        self.clock = clock
        self.period = period
        self.reset()

    def reset(self):
        self.last_tick_time = self.clock()
        self.next_decrement = self.period

    def update(self):
        curtime = self.clock()
        if self.next_decrement <= 0:
            if self.registers.delay_register > 0:
                self.registers.delay_register -= 1
            if self.registers.sound_register > 0:
                self.registers.sound_register -= 1
            if self.beep is not None:
                self.beep.set_beeping(self.registers.sound_register > 0)
            self.next_decrement = self.period

        self.next_decrement -= curtime - self.last_tick_time
        self.last_tick_time = curtime
