"""Host document discovery, annotation collection and output writing."""
