# Copyright (c) 2026 NASK. All rights reserved.
