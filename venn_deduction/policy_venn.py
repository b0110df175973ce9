def policy(env):
    # Strategy: carry every unplaced choice, in catalog order, to the centre of the
    # intersection. Walk the cursor one axis at a time (horizontal first), press once
    # it sits on the choice, keep the button held on the way and release on arrival.
    if env.drag_index is None:
        unplaced = [c for c in env.choices if c['region'] is None]
        if not unplaced:
            return [0, 0, 0]  # Everything is on the board
        target = unplaced[0]['pos']
        holding = False
    else:
        target = env.INTERSECTION_CENTER
        holding = True

    cursor_x, cursor_y = env.cursor_pos
    dx = target[0] - cursor_x
    dy = target[1] - cursor_y
    step = env.CURSOR_SPEED

    if dx >= step:
        return [4, int(holding), 0]  # Move right
    elif dx <= -step:
        return [3, int(holding), 0]  # Move left
    elif dy >= step:
        return [2, int(holding), 0]  # Move down
    elif dy <= -step:
        return [1, int(holding), 0]  # Move up
    elif holding:
        return [0, 0, 0]  # Release over the intersection
    else:
        return [0, 1, 0]  # Grab the choice under the cursor
