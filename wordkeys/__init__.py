"""wordkeys: speak the next word of a text on every MIDI note-on."""
