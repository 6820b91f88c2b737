"""Player status mod: welcome/goodbye broadcasts and scheduled messages."""
