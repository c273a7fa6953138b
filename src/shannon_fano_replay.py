# filename: shannon_fano_replay.py

import threading

from shannon_fano_core import ShannonFanoLogic
from shannon_fano_service import EMPTY_INPUT_MESSAGE, EXAMPLES

DEFAULT_SPEED_MS = 1000

NO_CHARACTERS_MESSAGE = "Input is empty or contains no processable characters."


class AlgorithmStep:
    IDLE = "idle"
    FREQUENCY_ANALYSIS = "frequency_analysis"
    SORTING = "sorting"
    PARTITIONING = "partitioning"
    CODE_ASSIGNMENT = "code_assignment"
    ENCODING = "encoding"
    COMPLETE = "complete"


class ShannonFanoReplay:
    """Replays the Shannon-Fano pipeline one stage at a time.

    ``step_forward`` advances the machine by hand. ``start`` and
    ``toggle_running`` drive it from a timer that fires every ``speed``
    milliseconds; only one timer is ever pending and it is cancelled before
    every transition, on pause, on ``reset`` and on ``close``.
    """

    def __init__(self, text="", speed=DEFAULT_SPEED_MS):
        self.logic = ShannonFanoLogic()
        self.input = text
        self.speed = speed
        self._timer = None
        self._generation = 0
        self._closed = False
        self._lock = threading.RLock()
        self._changed = threading.Condition(self._lock)
        self._reset_state()

    def _reset_state(self):
        self.frequencies = {}
        self.sorted_chars = []
        self.partition_history = []
        self.current_partition_index = 0
        self.tree = None
        self.codebook = {}
        self.encoded = ""
        self.statistics = None
        self.current_step = AlgorithmStep.IDLE
        self.is_running = False
        self.error = ""

    def _cancel_timer(self):
        # A timer that already fired cannot be cancelled; bumping the
        # generation makes its pending _tick a no-op
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _schedule(self):
        self._cancel_timer()
        if self.is_running and self.current_step not in (AlgorithmStep.IDLE, AlgorithmStep.COMPLETE):
            self._timer = threading.Timer(self.speed / 1000.0, self._tick, args=(self._generation,))
            self._timer.daemon = True
            self._timer.start()

    def _tick(self, generation):
        with self._lock:
            if self.is_running and generation == self._generation:
                self.step_forward()

    def _notify(self):
        self._changed.notify_all()

    def reset(self):
        with self._lock:
            self._cancel_timer()
            self._reset_state()
            self._notify()

    def set_input(self, text):
        with self._lock:
            self.input = text
            self.reset()

    def select_example(self, name):
        self.set_input(EXAMPLES[name])

    def set_speed(self, speed):
        with self._lock:
            self.speed = speed
            self._schedule()

    def start(self):
        with self._lock:
            if not self.input.strip():
                self.error = EMPTY_INPUT_MESSAGE
                self._notify()
                return False
            self.reset()
            self.current_step = AlgorithmStep.FREQUENCY_ANALYSIS
            self.is_running = True
            self._schedule()
            self._notify()
            return True

    def toggle_running(self):
        with self._lock:
            self.is_running = not self.is_running
            self._schedule()
            self._notify()

    def step_forward(self):
        with self._lock:
            self._cancel_timer()
            step = self.current_step

            if step == AlgorithmStep.IDLE:
                self.current_step = AlgorithmStep.FREQUENCY_ANALYSIS

            elif step == AlgorithmStep.FREQUENCY_ANALYSIS:
                self.frequencies = self.logic.count_frequencies(self.input)
                if not self.frequencies:
                    self.error = NO_CHARACTERS_MESSAGE
                    self.current_step = AlgorithmStep.IDLE
                    self.is_running = False
                elif len(self.frequencies) == 1:
                    char = next(iter(self.frequencies))
                    self.sorted_chars = [char]
                    self.codebook = {char: "0"}
                    self.encoded = "0" * len(self.input)
                    self.statistics = self.logic.compute_statistics(self.input, self.codebook)
                    self.current_step = AlgorithmStep.COMPLETE
                    self.is_running = False
                else:
                    self.current_step = AlgorithmStep.SORTING

            elif step == AlgorithmStep.SORTING:
                self.sorted_chars = self.logic.sort_by_frequency_desc(self.frequencies)
                self.partition_history = self.logic.build_partition_history(self.sorted_chars, self.frequencies)
                self.tree = self.logic.materialize_tree(self.partition_history)
                self.current_step = AlgorithmStep.PARTITIONING

            elif step == AlgorithmStep.PARTITIONING:
                if self.current_partition_index < len(self.partition_history) - 1:
                    self.current_partition_index += 1
                else:
                    self.current_step = AlgorithmStep.CODE_ASSIGNMENT

            elif step == AlgorithmStep.CODE_ASSIGNMENT:
                self.codebook = self.logic.build_codebook(self.partition_history)
                self.current_step = AlgorithmStep.ENCODING

            elif step == AlgorithmStep.ENCODING:
                self.encoded = self.logic.encode(self.input, self.codebook)
                self.statistics = self.logic.compute_statistics(self.input, self.codebook)
                self.current_step = AlgorithmStep.COMPLETE
                self.is_running = False

            else:
                self.is_running = False

            self._schedule()
            self._notify()
            return self.current_step

    def current_partition(self):
        if not self.partition_history:
            return None
        return self.partition_history[self.current_partition_index]

    def wait_until(self, step, timeout=None):
        with self._changed:
            self._changed.wait_for(lambda: self._closed or self.current_step == step, timeout=timeout)
            return self.current_step == step

    def close(self):
        with self._lock:
            self._cancel_timer()
            self._closed = True
            self.is_running = False
            self._notify()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
