"""Pure transformation kernel: schema naming, JSON shredding, conversion, record transform."""
