"""Built-in effects. Importing this package registers all of them."""

from meltmix.engine.effects import e01_noise  # noqa: F401
from meltmix.engine.effects import e02_scan_lines  # noqa: F401
from meltmix.engine.effects import e03_wave_distortion  # noqa: F401
from meltmix.engine.effects import e04_fractal_zoom  # noqa: F401
from meltmix.engine.effects import e05_slice_shift  # noqa: F401
from meltmix.engine.effects import e06_pixel_sort  # noqa: F401
from meltmix.engine.effects import e07_channel_shift  # noqa: F401
from meltmix.engine.effects import e08_block_displace  # noqa: F401
from meltmix.engine.effects import e09_invert_blocks  # noqa: F401
from meltmix.engine.effects import e10_sierpinski  # noqa: F401
