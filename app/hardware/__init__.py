"""Board detection, relay and sensor drivers, and the hardware bundle."""
