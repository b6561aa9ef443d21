class Controller:
    """ Super simple message passing mechanism between the signal handlers
        and the emission loop. Setting stopped=True makes the loop finish
        after the current pass.
    """

    def __init__(self):
        self.stopped = False
