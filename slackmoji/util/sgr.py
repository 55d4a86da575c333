# -----------------------------------------------------------------------------
# SGR (Select Graphic Rendition) sequences for coloured console output
# 2022 A. Shavykin <0.delameter@gmail.com>
# -----------------------------------------------------------------------------
import re


class SGRSequence:
    def __init__(self, *params: int):
        self._value = '\033[' + ';'.join(str(param) for param in params) + 'm'

    def __format__(self, format_spec: str) -> str:
        return self._value

    def __str__(self):
        return self._value

    def wrap(self, text: str) -> str:
        return f'{self._value}{text}{SGRRegistry.FMT_RESET}'


class SGRRegistry:
    FMT_RESET = SGRSequence(0)
    FMT_BOLD = SGRSequence(1)
    FMT_RED = SGRSequence(31)
    FMT_GREEN = SGRSequence(32)
    FMT_YELLOW = SGRSequence(33)
    FMT_BLUE = SGRSequence(34)
    FMT_CYAN = SGRSequence(36)
    FMT_GRAY = SGRSequence(37)

    SGR_REGEX = re.compile(r'\033\[[0-9;]*m')

    @staticmethod
    def remove_sgr_seqs(s: str) -> str:
        return SGRRegistry.SGR_REGEX.sub('', s)
