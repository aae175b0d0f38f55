"""Sensor drivers for the moisture probe and the flow meter."""
