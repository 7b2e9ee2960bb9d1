from apishape.core.path import body, default_response, get, path, post, resp
from apishape.core.schema import File, ListOf, field, shape


@shape("Pet", description="A pet in the store")
class Pet:
    id = field("integer", format_="int64", required=True)
    name = field("string", required=True, description="Pet name")
    tags = field(ListOf("string"))


@shape("PetFilter", forbid_unknown=True)
class PetFilter:
    limit = field("integer", query="limit", default=20, description="Page size")
    status = field(ListOf("string"), query="status", collection_format="csv")
    request_id = field("string", header="X-Request-Id")


@shape("PetByID")
class PetByID:
    id = field("integer", path="id", description="Pet id")


@shape("NewPet")
class NewPet:
    name = field("string", required=True)
    tags = field(ListOf("string"))


@shape("PetPhoto")
class PetPhoto:
    id = field("integer", path="id")
    caption = field("string", form_data="caption")
    photo = field(File, form_data="photo", required=True)


@shape("PetList")
class PetList:
    total = field("integer", header="X-Total-Count", description="Total pets")
    items = field(ListOf(Pet), embedded=True)


@shape("Error")
class Error:
    message = field("string", required=True)


@path("/pets", tags=["Pets"], summary="Pet collection")
class PetsAPI:
    @get(
        op_id="listPets",
        summary="List pets",
        request=body(PetFilter),
        responses=[resp(200, PetList, desc="A page of pets"), default_response(Error)],
    )
    def list(self):
        pass

    @post(
        op_id="createPet",
        summary="Create a pet",
        request=body(NewPet, content_type="application/json", desc="Pet to add"),
        responses=[resp(201, Pet), resp(4, Error, desc="Client error")],
    )
    def create(self):
        pass


@path("/pets/{id}", tags=["Pets"])
class PetAPI:
    @get(op_id="getPet", request=body(PetByID), responses=[resp(200, Pet), resp(404)])
    def get(self):
        pass


@path("/pets/{id}/photo", tags=["Pets"])
class PetPhotoAPI:
    @post(op_id="uploadPetPhoto", request=body(PetPhoto), responses=[resp(204)])
    def upload(self):
        pass
