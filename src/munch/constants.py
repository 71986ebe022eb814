BOARD_SIZE = 8
POINTS_PER_TILE = 10

# Shortest run that counts as a match.
MIN_RUN = 3
# Upper bound on detect -> resolve iterations for a single swap.
MAX_CASCADE_STEPS = 500
# Attempts made by the initial board generator before giving up.
MAX_GENERATION_ATTEMPTS = 200

# Monster kinds and the image each one is drawn with.
DEFAULT_MONSTERS = {
    'blue': '/monsters/blue.png',
    'pink': '/monsters/pink.png',
    'green': '/monsters/green.png',
    'yellow': '/monsters/yellow.png',
    'purple': '/monsters/purple.png',
}
