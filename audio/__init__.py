"""Voice recordings: the on-disk audio store (`audio.manager`) and its blueprint (`audio.routes`)."""
