"""TDS packet headers, packets, the packet queue and protocol packages."""