## Build a printable guest Wi-Fi tag, check it and write STL + DXF.

from qrsolid.app import BarcodeModel
from qrsolid.config import ModelConfig
from qrsolid.geometry_checks import check_layout, faces_outward, mesh_closed
from qrsolid.io.sink import DirectorySink
from qrsolid.payload import WifiNetwork

config = ModelConfig(footprint_mm=60.0, border_mm=4.0, export_name="guest.stl",
                     sketch_name="guest.dxf", header="guest wifi tag")
model = BarcodeModel(config)
model.draw_network(WifiNetwork(ssid="Guest", security="WPA", password="welcome123"))

solids = model.scene.current()
mesh = model.mesh()
print("layout ok:", bool(check_layout(solids)))
print("closed:", bool(mesh_closed(mesh)), "outward:", bool(faces_outward(mesh, solids)))

sink = DirectorySink("out", overwrite=True)
model.export(sink)
model.export_sketch(sink, scale=2.0)
print("wrote", mesh.triangle_count, "triangles")
