import logging


class Config(object):

    # Enable debug output
    debug = False

    # Verify that values assigned to constant fields match the constant
    check_constants = True


config = Config()


def set_debug(flag=True):
    """Toggle DEBUG level logging for the ``valueshapes`` loggers"""
    config.debug = bool(flag)
    level = logging.DEBUG if config.debug else logging.NOTSET
    logging.getLogger('valueshapes').setLevel(level)
