"""Loads a path of a cubic and a smooth cubic curve, drags the end point
of the cubic curve like an editor would do and saves the result together with
all handles and guides as SVG file.
"""

import os

import svgwrite

from pathedit.geom import Point
from pathedit.interaction import PathEditor
from pathedit.path import PathCommands

OUTPUT_FILE = "data/output/example/svg/drag_smooth_curve.svg"

PATH_STRING = "M 10 80 C 40 10, 65 10, 95 80 s 55 70, 85 0"

HANDLE_RADIUS = 2.5
STROKE_WIDTH = 1.0


def main(output_file: str = OUTPUT_FILE):
    """Drags the end point of the C segment by (10, 20) and saves the edited
    path with its handles (circles) and guides (lines) to _output_file_.
    """
    path = PathCommands.from_string(PATH_STRING)
    editor = PathEditor(path, on_commit=lambda defs: print(f"committed {len(defs)} commands"))

    end = path.interaction_points()[1].positions["end"]
    editor.press(1, "end", end)
    editor.move(end + Point(5, 10))
    editor.release(end + Point(10, 20))

    box = path.bounding_box()
    margin = 10
    dwg = svgwrite.Drawing(
        output_file,
        size=(f"{box.width + 2 * margin}mm", f"{box.height + 2 * margin}mm"),
        viewBox=f"{box.xmin - margin} {box.ymin - margin} {box.width + 2 * margin} {box.height + 2 * margin}",
    )

    # Draw the path itself
    dwg.add(dwg.path(d=path.serialize(), stroke="black", stroke_width=STROKE_WIDTH, fill="none"))

    # Draw guides, the derived ones dashed
    for points in path.interaction_points():
        for guide in points.guides:
            line = dwg.line(
                start=(guide.start.x, guide.start.y),
                end=(guide.end.x, guide.end.y),
                stroke="grey",
                stroke_width=STROKE_WIDTH / 2,
            )
            if not guide.interactive:
                line.dasharray([2, 2])
            dwg.add(line)

    # Draw handles, the derived ones unfilled
    for points in path.interaction_points():
        for handle in points.handles.values():
            dwg.add(
                dwg.circle(
                    center=(handle.position.x, handle.position.y),
                    r=HANDLE_RADIUS,
                    stroke="blue",
                    stroke_width=STROKE_WIDTH / 2,
                    fill="blue" if handle.interactive else "none",
                )
            )

    # Save the SVG file
    directory = os.path.dirname(output_file)
    if directory:
        os.makedirs(directory, exist_ok=True)
    dwg.saveas(output_file, pretty=True, indent=2)

    print(f"path: {path.serialize()}")
    print(f"file saved: {output_file}")


if __name__ == "__main__":
    main()
