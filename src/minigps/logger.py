import logging

log = logging.getLogger('minigps')
