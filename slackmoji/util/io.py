# -----------------------------------------------------------------------------
# i/o helper methods
# 2022 A. Shavykin <0.delameter@gmail.com>
# -----------------------------------------------------------------------------
import re
import shutil
from math import trunc


def fmt_sizeof(num, separator=' ', unit='b'):
    # result max length: 8
    # 5 chars for number, 2 chars for unit, 1 for separator (with default options)
    num = max(0, num)
    for unit_idx, unit_prefix in enumerate(['', 'k', 'M', 'G', 'T', 'P', 'E', 'Z']):
        unit_full = f'{unit_prefix}{unit}'
        if num >= 1024.0:
            num /= 1024.0
            continue
        if unit_idx == 0:
            num_str = f'{num:5d}'
        else:
            num_str = f'{AutoFloat(num):5f}'
        return f'{num_str}{separator}{unit_full}'

    return f'{num!s}{unit}'


def get_terminal_width() -> int:
    return shutil.get_terminal_size().columns - 2


class AutoFloat(float):
    # class for fixed-length float values printing
    # dynamically adjusts decimal digits amount to fill string as much as possible

    # usage:
    # f'{AutoFloat(1234.56):4f}'   ->   1235
    # f'{AutoFloat( 123.56):4f}'   ->    124
    # f'{AutoFloat(  12.56):4f}'   ->   12.6
    # f'{AutoFloat(   1.56):4f}'   ->   1.56

    # to hide decimals:
    # f'{AutoFloat(1234.56):<4d}'  ->   1235
    # f'{AutoFloat(  12.56):<4d}'  ->   13

    RE_MAX_LEN = re.compile(r'(\d+)([fd])$')

    def __format__(self, format_spec: str) -> str:
        converted_spec = self._convert_spec(format_spec)
        return super().__format__(converted_spec)

    def _convert_spec(self, format_spec: str) -> str:
        spec_matches = self.RE_MAX_LEN.findall(format_spec)
        if not spec_matches or len(spec_matches) > 1:
            raise RuntimeError('AutoFloat format should be "4f" or "3d"')

        max_len = int(spec_matches[0][0])
        ftype = spec_matches[0][1]
        if ftype == 'd':
            return self.RE_MAX_LEN.sub(f'{max_len}.0f', format_spec)

        max_decimals_len = 2
        integer_len = len(str(trunc(self)))
        decimals_and_point_len = min(max_decimals_len + 1, max_len - integer_len)

        decimals_len = 0
        if decimals_and_point_len >= 2:  # dot without decimals makes no sense
            decimals_len = decimals_and_point_len - 1

        return self.RE_MAX_LEN.sub(f'{max_len}.{decimals_len!s}f', format_spec)
