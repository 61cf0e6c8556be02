from dataclasses import dataclass


@dataclass(frozen=True)
class VisC:
    # Colors
    black = (0, 0, 0)
    white = (255, 255, 255)
    grey = (100, 100, 100)
    colors = [(255, 0, 0), (0, 255, 0), (0, 0, 255)]
    trail_color = (255, 255, 255, 60)  # RGBA, light and faint

    # Canvas
    size = 400  # [px], square
    sizes = (400, 800)  # Available canvas variants [px]
    scale = 100.0  # [px/unit]
    fps = 60

    # Trail
    trail_width = 1  # [px]

    # Bodies
    body_radius = 0.08  # [units]

    # Sizes on the screen [px]
    font_size = 20
    small_font_size = 14

    label_x = 10
    label_y = 10

    button_x = 10
    button_y = 40
    button_width = 130
    button_height = 20
    button_padding = 4
    button_color = (60, 60, 90)
    button_selected_color = (100, 100, 255)
    button_border_color = (200, 200, 200)
