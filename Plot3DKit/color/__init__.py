"""
Colour handling – colour parsing, heat colours and the colour/label mapper.
"""

from Plot3DKit.color.colors import (BLACK, Color, convert_to_heat, heat_colors,
                                    label_color, looks_like_color, parse_color)
from Plot3DKit.color.colormap import (ColorMap, ColorPolicy, LabelMap,
                                      classify_color_column, get_color_map)

__all__ = [
    'Color', 'BLACK',
    'parse_color', 'looks_like_color',
    'convert_to_heat', 'heat_colors', 'label_color',
    'ColorMap', 'ColorPolicy', 'LabelMap',
    'classify_color_column', 'get_color_map',
]
