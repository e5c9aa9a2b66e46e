"""Channel identifiers and channel-manager bookkeeping records."""