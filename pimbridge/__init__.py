"""pimbridge: adapter between the open contact model and a bounded, slot-based contact store."""
