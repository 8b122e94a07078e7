"""Match algorithms, scoring schemes and Latin letter normalization."""