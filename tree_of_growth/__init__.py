"""Personal task tracker whose completed tasks grow a virtual tree."""
